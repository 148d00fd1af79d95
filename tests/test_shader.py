from ibiscus.shader import ShaderSource, read_contents


def test_read_contents_round_trip(tmp_path):
    data = bytes(range(256))
    path = tmp_path / "blob.bin"
    path.write_bytes(data)
    assert read_contents(path) == data


def test_read_contents_missing_file(tmp_path):
    assert read_contents(tmp_path / "missing.vert") == b""


def test_read_contents_accepts_str_path(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"line one\r\nline two\n")
    assert read_contents(str(path)) == b"line one\r\nline two\n"


def test_shader_source_load(tmp_path):
    vertex_text = "#version 330 core\nvoid main() {}\n"
    fragment_text = "#version 330 core\nout vec4 c;\nvoid main() { c = vec4(1.0); }\n"
    vert = tmp_path / "s.vert"
    frag = tmp_path / "s.frag"
    vert.write_text(vertex_text)
    frag.write_text(fragment_text)
    source = ShaderSource.load(vert, frag)
    assert source.vertex == vertex_text
    assert source.fragment == fragment_text


def test_shader_source_missing_stage_is_empty(tmp_path):
    vert = tmp_path / "s.vert"
    vert.write_text("void main() {}")
    source = ShaderSource.load(vert, tmp_path / "nope.frag")
    assert source.vertex == "void main() {}"
    assert source.fragment == ""