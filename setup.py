from setuptools import setup

setup(
    name="tempo",
    version="0.1.0",
    description="Calendar dates, times, and durations with leap seconds, "
    "end-of-day, and injectable clocks",
    license="MIT",
    package_dir={"": "pysrc"},
    packages=["tempo"],
    python_requires=">=3.9",
    install_requires=['tzdata>=2020.1; sys_platform == "win32"'],
    extras_require={"test": ["pytest", "hypothesis"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
)
