import setuptools

setuptools.setup(
    name="dicedist",
    version="0.0.0",
    classifiers=["Programming Language :: Python :: 3"],
    packages=setuptools.find_packages(exclude=["tests"]),
    package_data={"dicedist": ["dice.lark", "settings.default.yaml"]},
    entry_points={"console_scripts": ["dicedist=dicedist.__main__:main"]},
    install_requires=["lark", "numpy", "pyyaml", "plotly", "kaleido", "pandas"],
    extras_require={"test": ["pytest"]},
)
