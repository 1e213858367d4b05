from setuptools import setup, find_packages

__version__ = '0.1.0'

requirements = [
    'coloredlogs',
    'pymongo',
    'sanic',
]

test_requirements = [
    'pytest',
    'sanic-testing',
]

setup(
    name='staking-ledger',
    version=__version__,
    description='Time-locked token staking ledger with a fixed unlock curve.',
    packages=find_packages(include=['staking', 'staking.*']),
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    python_requires='>=3.8',
    zip_safe=True,
    include_package_data=True,
)
