from setuptools import setup, find_packages

setup(
    name             = 'flowreader',
    version          = '1.0.0',
    description      = 'flowreader: read-only query, export and statistics for Wispr Flow transcriptions',
    packages         = find_packages(exclude=['tests*']),
    install_requires = [],
    extras_require   = {
        'test': ['pytest>=7'],
    },
    entry_points     = {
        'console_scripts': [
            'flowreader = flowreader.cli:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
