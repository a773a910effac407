import setuptools
from pathlib import Path

ROOT = Path(__file__).parent


def read_requirements(filename: str = "requirements.txt") -> list[str]:
    req_path = ROOT / filename
    if not req_path.exists():
        return []
    reqs: list[str] = []
    for line in req_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        reqs.append(line)
    return reqs


readme = ROOT / "README_PYPI.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setuptools.setup(
    name="tapegrad",
    version="0.1.0a0",  # PEP 440 compliant
    description=(
        "tapegrad is a tape-based reverse-mode automatic differentiation engine "
        "for tensors, with higher-order gradients, pluggable per-device backends "
        "and plain Python control flow in differentiated functions."
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=read_requirements(),
    extras_require={"test": ["pytest"]},
    zip_safe=False,
)
