from setuptools import setup, find_packages

setup(
    name="kp-case-matcher",
    version="0.1.0",
    packages=find_packages(include=["kp_case_matcher", "kp_case_matcher.*"]),
    install_requires=[
        "pydantic>=2.0",
        "typing-extensions>=4.7",
        "asgi-correlation-id>=4.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10,<4.0",
)
