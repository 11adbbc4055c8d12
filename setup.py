from setuptools import setup, find_packages

version = '0.0.0'
for line in open('svbreakend/_version.py'):
    if line.startswith('__version__'):
        version = line.split('=')[1].strip().strip('"')

setup(
    name='svbreakend',
    version=version,
    description='Streaming breakend evidence merge and local assembly of SV breakends',
    packages=find_packages(exclude=('build', 'dist', 'tests')),
    install_requires=[
        'numpy',
        'matplotlib',
        'igraph>=0.10'
    ],
    extras_require={
        'bam': ['pysam'],
        'test': ['pytest']
    },
    scripts=['bin/svbreakend']
)
