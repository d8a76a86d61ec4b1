from setuptools import find_packages, setup

setup(
    name="hotcert",
    version="0.0.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "cryptography>=42",
        "pydantic>=2",
        "watchdog>=4",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "hotcert=hotcert.cli:cli",
        ],
    },
)
