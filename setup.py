from setuptools import setup, find_packages

setup(
    name="tipmaster",
    version="0.1.0",
    description="Sports prediction dashboard with live scores and result tracking",
    author="Andy Cheng",
    packages=find_packages(exclude=["tests", "examples"]),
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "tipmaster=tipmaster.cli:main",
        ],
    },
)
