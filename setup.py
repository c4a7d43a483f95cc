#!/usr/bin/python
# -*- encoding: utf-8 -*-
import ast
import re

from setuptools import find_packages
from setuptools import setup

## The version number is maintained in one place only,
## davkit.__version__, and parsed out from there.
_version_re = re.compile(r"__version__\s+=\s+(.*)")
with open("davkit/__init__.py", "rb") as f:
    version = str(
        ast.literal_eval(_version_re.search(f.read().decode("utf-8")).group(1))
    )

if __name__ == "__main__":
    test_packages = [
        "pytest",
        "pytest-coverage",
        "coverage",
        "PyYAML",
    ]

    setup(
        name="davkit",
        version=version,
        description="WebDAV (RFC4918) client library",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: Apache Software License",
            "Operating System :: OS Independent",
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Topic :: Internet :: WWW/HTTP",
            "Topic :: Software Development :: Libraries " ":: Python Modules",
        ],
        keywords="webdav rfc4918 acl versioning",
        license="Apache",
        python_requires=">=3.10",
        packages=find_packages(exclude=["tests", "tests.*"]),
        include_package_data=True,
        zip_safe=False,
        install_requires=[
            "lxml",
            "requests>=2.11",
            "urllib3",
            "typing_extensions",
        ],
        extras_require={
            "test": test_packages,
            "yaml": ["PyYAML"],
        },
    )
