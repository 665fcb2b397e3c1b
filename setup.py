import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="glomecore",
    version="0.1.0",
    author="Google LLC",
    description="Core of the GLOME protocol: session, tagging and tag checks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/google/glome",
    packages=["glomecore"],
    install_requires=[
        "cryptography",
    ],
    extras_require={
        "test": ["hypothesis", "pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
    ],
    python_requires='>=3.6',
)
