import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="bindable_codegen",
    version="0.3.0",
    description="Generate change-notifying bindings, metadata tables and name dispatch for annotated types (C# and Python)",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="code generation data binding mvvm property changed csharp python",
    license="MIT",
    packages=find_packages(include=["bindable_codegen", "bindable_codegen.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
        "jinja2>=3.0.0",
        "structlog>=23.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bindable_codegen=bindable_codegen.bindable_codegen:bindable_codegen",
        ],
    },
    include_package_data=True,
    package_data={
        "bindable_codegen": ["templates/**/*.jinja2"],
    },
    zip_safe=False,
)
