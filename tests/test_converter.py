import io
import struct

import pytest

from stlconvert.converter import convert
from stlconvert.errors import DetectionError, ParseError, StlIOError
from stlconvert.models import Encoding

from conftest import EMPTY_ASCII, ONE_TRIANGLE_ASCII, ChunkedRaw, binary_stl, make_triangle


class FailingOutput(io.BytesIO):
    def write(self, data):
        raise OSError("disk full")


def run(data: bytes):
    out = io.BytesIO()
    result = convert(io.BytesIO(data), out)
    return result, out.getvalue()


class TestConvert:

    def test_ascii_to_binary(self):
        result, data = run(ONE_TRIANGLE_ASCII.encode("ascii"))
        assert result.source_encoding is Encoding.ASCII
        assert result.target_encoding is Encoding.BINARY
        assert result.triangle_count == 1
        assert len(data) == 134
        assert data == binary_stl([make_triangle()])

    def test_binary_to_ascii(self):
        result, data = run(binary_stl([make_triangle()]))
        assert result.source_encoding is Encoding.BINARY
        assert result.target_encoding is Encoding.ASCII
        assert data.decode("ascii") == ONE_TRIANGLE_ASCII

    def test_full_cycle_reproduces_ascii(self):
        _, binary = run(ONE_TRIANGLE_ASCII.encode("ascii"))
        _, text = run(binary)
        assert text.decode("ascii") == ONE_TRIANGLE_ASCII

    def test_empty_mesh_cycle(self):
        result, binary = run(EMPTY_ASCII.encode("ascii"))
        assert result.triangle_count == 0
        assert len(binary) == 84
        assert struct.unpack_from("<I", binary, 80)[0] == 0
        _, text = run(binary)
        assert text.decode("ascii") == EMPTY_ASCII

    def test_truncated_binary_fails(self):
        with pytest.raises(ParseError):
            run(binary_stl([make_triangle()], count=3))

    def test_malformed_ascii_fails(self):
        text = ONE_TRIANGLE_ASCII.replace("    endloop\n", "").replace("endsolid \n", "")
        with pytest.raises(ParseError):
            run(text.encode("ascii"))

    def test_empty_input_fails(self):
        with pytest.raises(DetectionError):
            run(b"")

    def test_stream_failure_is_wrapped(self):
        with pytest.raises(StlIOError) as excinfo:
            convert(io.BytesIO(ONE_TRIANGLE_ASCII.encode("ascii")), FailingOutput())
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_unseekable_input_is_buffered(self):
        source = io.BufferedReader(ChunkedRaw(ONE_TRIANGLE_ASCII.encode("ascii")))
        out = io.BytesIO()
        result = convert(source, out)
        assert result.source_encoding is Encoding.ASCII
        assert out.getvalue() == binary_stl([make_triangle()])
