import setuptools

setuptools.setup(
    name="pocket_card_browser",
    version="0.1",
    description="Card catalog browser: multi-criteria card search with incremental list delivery",
    packages=["services", "repositories", "utils"],
    py_modules=["main"],
    classifiers=["Programming Language :: Python :: 3"],
    python_requires=">=3.11",
    install_requires=[
        "loguru",
        "pillow",  # Card images and placeholder
        "curl_cffi",  # Remote card JSON download
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
)
