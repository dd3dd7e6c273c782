from arry.response import Headers, Response, ResponseRecorder


def test_response_write_sets_code():
    rec = ResponseRecorder()
    res = Response(writer=rec, code=200)
    res.write(b"test")
    assert rec.code == 200
    assert rec.text() == "test"
    assert res.sent is True


def test_write_header_only_first_counts():
    rec = ResponseRecorder()
    res = Response(writer=rec, code=201)
    res.write_header(302)
    res.write(b"x")
    assert rec.code == 302


def test_headers_case_insensitive():
    headers = Headers()
    headers.set("x-test", "a")
    assert headers.get("X-TEST") == "a"
    headers.add("X-Test", "b")
    assert headers.get_all("x-test") == ["a", "b"]
    headers.delete("X-test")
    assert headers.get("x-test") == ""
    assert list(headers.items()) == []


def test_response_header_is_writer_headers():
    rec = ResponseRecorder()
    res = Response(writer=rec)
    res.header().set("Location", "/new")
    assert rec.headers.get("Location") == "/new"