import setuptools

try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Build, deploy, verify, push and clean up Docker containers"

setuptools.setup(
    name="deploykit",
    version="0.1.0",
    description="Build, deploy, verify, push and clean up Docker containers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", include=["deploykit", "deploykit.*"]),
    install_requires=[
        "httpx",
        "python-dotenv",
        "rich",
        "typer",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "deploykit=deploykit.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
