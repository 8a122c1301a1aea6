#!/usr/bin/env python3
"""
Setup script for reinitkbd
"""

from setuptools import setup, find_packages
import os
import sys

# Import the version
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
from __version__ import __version__

# Read README for long_description
def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()

setup(
    name='reinitkbd',
    version=__version__,
    description='Re-apply keyboard layout and repeat rate whenever a keyboard is attached',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    py_modules=['__version__'],  # Top-level modules only
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'pyudev',        # Keyboard enumeration and hot-plug events
        'python-xlib',   # X server connection check
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
        ],
    },
    entry_points={
        'console_scripts': [
            'reinitkbd=reinitkbd.cli:main',
            'reinitkbd-attach=reinitkbd.attach:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: End Users/Desktop',
        'Topic :: Utilities',
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
        'Environment :: X11 Applications',
        'Topic :: Desktop Environment',
    ],
)
