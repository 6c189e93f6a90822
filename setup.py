#!/usr/bin/env python

from os.path import abspath, dirname, join

from setuptools import find_packages, setup

with open(join(dirname(abspath(__file__)), 'ishihara', 'version.py')) as version_file:
    exec(compile(version_file.read(), "version.py", 'exec'))

setup(name='ishihara',
      version=version,  # noqa: F821 pylint:disable=undefined-variable
      description="Generation of Ishihara-style colour vision test plates",
      packages=find_packages(include=["ishihara", "ishihara.*"]),
      # 3.7 and up, but not Python 4
      python_requires='~=3.7',
      install_requires=[
          "attrs>=19.2.0",
          "vistautils>=0.21.0",
          "immutablecollections>=0.12.0",
          "more-itertools>=7.2.0",
          "numpy>=1.17",
          "scipy>=1.3",
          "Pillow>=8.0",
      ],
      extras_require={
          "test": ["pytest>=5.0"],
      },
      scripts=[
      ],
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
          "Operating System :: OS Independent",
      ]
      )
