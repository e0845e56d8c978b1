#!/usr/bin/python
import os

from setuptools import find_packages
from setuptools import setup

__version__ = '0.1.0'


def read(f):
    return open(os.path.join(os.path.dirname(__file__), f)).read().strip()


setup(
    name='py_tls_exporter',
    version=__version__,
    provides=["py_tls_exporter"],
    license='Apache License 2.0',
    description='Export distributed traces to Volcengine TLS as log records.',
    long_description='\n\n'.join((read('README.md'), read('CHANGELOG.rst'))),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=('tests*', 'tools*')),
    package_data={
        'py_tls_exporter': ['py.typed'],
    },
    python_requires='>=3.8',
    install_requires=[
        'protobuf>=4.23.0',
        'PyStaticConfig>=0.10.4',
        'PyYAML',
        'typing-extensions>=3.10.0.0',
    ],
    extras_require={
        'opentelemetry': 'opentelemetry-sdk>=1.15.0',
        'sdk': 'volcengine',
        'testing': [
            'opentelemetry-sdk>=1.15.0',
            'pytest',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
    ],
)
