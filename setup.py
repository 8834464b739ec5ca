#!/usr/bin/env python
# -*- coding: utf8 -*-
# vim: ts=4 sw=4 et ai:

import pathlib
from setuptools import setup, find_packages

base = pathlib.Path(__file__).parent

README = (base / 'README.md').read_text()

setup(
      name='rotftp',
      version='0.1.0',
      description='Read-only TFTP server for a single in-memory payload',
      long_description=README,
      long_description_content_type='text/markdown',
      packages=find_packages(exclude=['tests', 'tests.*']),
      python_requires='>=3.6',
      classifiers=[
        'Programming Language :: Python :: 3',
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Environment :: No Input/Output (Daemon)',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX',
        'Topic :: Internet',
        ]
      )
