#!/usr/bin/python3


from setuptools import find_packages, setup

requires = [
    "PyGObject",
    "babel",
    "packaging",
]

extras = {
    "test": ["pytest", "time-machine"],
}


setup(
    name="restbreak",
    version="1.0.0",
    description="Reminds you to take tiny and big breaks while working at the computer",
    license="GPL-3.0-or-later",
    python_requires=">=3.9",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    package_data={"restbreak": ["config/*.json"]},
    install_requires=requires,
    extras_require=extras,
    entry_points={"console_scripts": ["restbreak = restbreak.__main__:main"]},
)
