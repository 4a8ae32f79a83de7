"""Setup configuration for mysql_to_access package."""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mysql_to_access",
    version="0.1.0",
    author="Your Name",
    description="Copy the tables of a MySQL database into a new Microsoft Access database file",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pymysql>=1.0.0",
        "pandas>=1.5.0",
        "pyodbc>=4.0.30",
        "msaccessdb>=1.0.0",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mysql-to-access=mysql_to_access_pkg.runner:main",
        ],
    },
)
