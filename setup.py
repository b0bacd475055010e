from setuptools import setup, find_packages

setup(
    name='artifactfetch',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.11',
    install_requires=[
        'requests',
        'urllib3',
        'PyYAML',
        'platformdirs',
        'rich',
        'Brotli',
    ],
    extras_require={
        'test': [
            'pytest<9',
            'pytest-mock',
        ],
    },
    entry_points={
        'console_scripts': [
            'artifactfetch=artifactfetch.cli:main',
        ],
    },
)
