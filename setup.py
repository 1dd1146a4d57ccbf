from setuptools import setup, find_packages

setup(
    name="hashline_editor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
        # Line hashing
        "xxhash>=3.0",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    description="Hash-anchored line editing for files.",
)
