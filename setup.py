import setuptools

setuptools.setup(
    name="infra",
    version="0.0.1",

    description="CDK Python app for S3 + CloudFront hosting and a CodePipeline release pipeline",
    author="author",

    packages=["infra"],

    install_requires=[
        "aws-cdk-lib>=2.156.0,<3.0.0",
        "constructs>=10.0.0,<11.0.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },

    python_requires=">=3.9",

    classifiers=[
        "Development Status :: 4 - Beta",

        "Intended Audience :: Developers",

        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",

        "Topic :: System :: Systems Administration",
        "Topic :: Utilities",

        "Typing :: Typed",
    ],
)
