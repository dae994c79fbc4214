from setuptools import setup, find_packages

setup(
    name="distilqa",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "torch>=2.0.0",
        "transformers>=4.40.0,<5",
        "tokenizers>=0.15.0",
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "api": [
            "fastapi>=0.110.0,<0.137",
            "pydantic>=2.0.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
            "fastapi>=0.110.0,<0.137",
            "pydantic>=2.0.0",
        ],
        "all": [
            "fastapi>=0.110.0,<0.137",
            "pydantic>=2.0.0",
        ],
    },
)
