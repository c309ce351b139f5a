from setuptools import setup


setup(
    name="budget-doctor",
    version="0.1.0",
    description="Extract a monthly income, expense and savings summary from messy budget spreadsheet exports",
    packages=["budget_doctor"],
    python_requires=">=3.10",
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
        "rapidfuzz",
    ],
    extras_require={
        "excel-legacy": ["xlrd"],
        "ods": ["odfpy"],
        "test": ["pytest"],
        "all": ["xlrd", "odfpy"],
    },
    entry_points={
        "console_scripts": [
            "budget-doctor=budget_doctor.cli:main",
        ]
    },
)
