from setuptools import setup, find_packages

setup(
    name="uiauto-ax",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "macos": [
            "pyobjc-framework-ApplicationServices>=9.0",
            "pyobjc-framework-Cocoa>=9.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
