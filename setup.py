from setuptools import setup, find_packages

setup(
    name="livebus-routing",
    version="0.1.0",
    description="Live-prediction bus trip planning: walk, wait, ride, walk.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main_cli"],
    install_requires=[
        "requests",
        "pytz",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "livebus=main_cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.7',
)
