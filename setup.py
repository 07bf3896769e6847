#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Setup shim for N-Print

Package metadata, dependencies and the ``nprint`` entry point live in
pyproject.toml; this file only exists for tools that still call setup.py.
"""

from setuptools import setup

setup()
