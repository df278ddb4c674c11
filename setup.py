from setuptools import setup, find_packages

setup(
    name="participium",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"participium": ["data/*.geojson"]},
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "pydantic",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
        "shapely",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
