from setuptools import setup, find_packages

setup(
    name="water_quality_enrichment",
    version="0.3.0",
    description="Tide and rainfall enrichment of water quality sample data",
    author="NYC Water Quality",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.31.0",
        "pandas>=2.0.0",
        "numpy>=1.24.0",    # For vectorised distance calculations
        "pyyaml>=6.0.0",    # For YAML configuration files
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'responses>=0.23.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'enrich-data=wq_enrichment.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Hydrology',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
