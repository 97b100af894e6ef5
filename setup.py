# setup.py
from setuptools import setup, find_packages

setup(
    name='tuibridge',
    version='0.1.0',
    description='A platform bridge that reconciles a virtual UI tree against a retained-mode terminal scene graph.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',

    # Finds the `tuibridge` and `tuibridge_cli` packages
    packages=find_packages(include=['tuibridge', 'tuibridge.*', 'tuibridge_cli']),
    include_package_data=True,

    install_requires=[
        'PySide6',
        'typer[all]',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },

    # Creates an executable script named `tuibridge` that calls the `app`
    # object inside `tuibridge_cli.main`.
    entry_points={
        'console_scripts': [
            'tuibridge = tuibridge_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
        'Environment :: Console :: Curses',
    ],
    python_requires='>=3.10',
)
