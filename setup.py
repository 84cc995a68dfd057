from setuptools import setup, find_packages

with open("README.md", "r") as f:
    long_description = f.read()

setup(
    name='fargoplot',
    version='0.1',
    description="Reformat 2D polar hydro outputs and plot them with gnuplot.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        'Click',
        'numpy',
        'pandas',
        'rich',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'fargoplot=fargoplot.cli:cli'
        ]
    }
)
