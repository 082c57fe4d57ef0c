from setuptools import setup

setup(
    name='glacier-emptier',
    version='1.0.0',
    description='Delete every archive of an AWS S3 Glacier vault from its latest inventory',
    license='MIT',
    packages=['glacier_emptier'],
    python_requires='>=3.8',
    install_requires=[
        'boto3>=1.24.66',
        'botocore>=1.27.66',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'glacier-emptier=glacier_emptier.cli:main',
        ],
    },
    zip_safe=False,
)
