# setup.py
from setuptools import setup, find_packages

setup(
    name="systemlog",
    version="1.0.0",
    description="Leveled application logger with size-rotated, zip-archived log files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),  # Encuentra automáticamente 'systemlog' bajo src/
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'systemlog=systemlog.interface.cli.app:main',  # Arnés de demostración vía CLI
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
