from setuptools import setup, find_namespace_packages

setup(
    name="library_desk",
    version="0.1.0",
    packages=find_namespace_packages(include=['api*', 'cli*', 'core*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "fastapi",
        "pydantic>=2",
        "python-dotenv",
        "alembic",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",  # fastapi.testclient
        ],
    },
    entry_points={
        "console_scripts": [
            "library-desk=cli.main:main",
        ],
    },
)
