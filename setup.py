from setuptools import setup, find_packages

main_ns = {}
with open("src/xlsx_parser/_version.py") as ver_file:
    exec(ver_file.read(), main_ns)

setup(
    name="xlsx-parser",
    version=main_ns["__version__"],
    description="Package to read data from Excel .xlsx and .xlsm spreadsheets",
    license="MIT",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    entry_points={
        "console_scripts": [
            "cat-xlsx=xlsx_parser._cat_xlsx:main",
        ],
    },
    install_requires=["enum-tools", "pendulum"],
    extras_require={
        "test": ["pytest", "pytest-check", "pytest-console-scripts"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
