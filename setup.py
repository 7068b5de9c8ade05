#!/usr/bin/env python

"""The setup script."""

import io
import re
from os import path
from setuptools import setup, find_packages

with open('README.md') as readme_file:
    readme = readme_file.read()

here = path.abspath(path.dirname(__file__))

with io.open(path.join(here, "pagewith", "__init__.py"), encoding="utf-8") as f:
    version = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)

# get the dependencies and installs
with io.open(path.join(here, "requirements.txt"), encoding="utf-8") as f:
    all_reqs = f.read().split("\n")

install_requires = [x.strip() for x in all_reqs if x.strip() and "git+" not in x]

setup_requirements = []

test_requirements = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.23.0",
    "httpx>=0.25.0",
]

setup(
    author="pagewith contributors",
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    description="Serve front-end usage examples in a real browser for tests.",
    entry_points={
        'console_scripts': [
            'pagewith=pagewith.__main__:main',
        ],
    },
    install_requires=install_requires,
    extras_require={"test": test_requirements},
    license="Apache Software License 2.0",
    long_description=readme,
    long_description_content_type='text/markdown',
    include_package_data=True,
    keywords='pagewith',
    name='pagewith',
    packages=find_packages(include=['pagewith', 'pagewith.*']),
    package_data={"pagewith": ["templates/*.html"]},
    setup_requires=setup_requirements,
    test_suite='tests',
    tests_require=test_requirements,
    version=version,
    zip_safe=False,
)
