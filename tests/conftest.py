import numpy as np
import pytest


@pytest.fixture
def write_field(tmp_path):
    def write(values, name="gasdens0.dat"):
        path = tmp_path / name
        np.asarray(values, dtype=np.float64).tofile(path)
        return path
    return write


@pytest.fixture
def write_text(tmp_path):
    def write(text, name):
        path = tmp_path / name
        path.write_text(text)
        return path
    return write
