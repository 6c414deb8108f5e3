from google.protobuf.descriptor_pb2 import MethodOptions, ServiceOptions, SourceCodeInfo

from protorust.ast import Comments, Method, Service


def _location(**kwargs):
    return SourceCodeInfo.Location(path=[4, 0], **kwargs)


def test_from_location_splits_lines():
    comments = Comments.from_location(
        _location(leading_comments=" one\n two\n", trailing_comments=" tail\n")
    )
    assert comments.leading == [" one", " two"]
    assert comments.trailing == [" tail"]
    assert comments.leading_detached == []


def test_from_location_without_comments():
    comments = Comments.from_location(_location())
    assert comments.leading == []
    assert comments.trailing == []
    assert comments.leading_detached == []


def test_from_location_detached_blocks():
    comments = Comments.from_location(
        _location(leading_detached_comments=[" a\n b\n", " c\n"])
    )
    assert comments.leading_detached == [[" a", " b"], [" c"]]


def test_from_location_strips_carriage_returns():
    comments = Comments.from_location(_location(leading_comments=" a\r\n b\r\n"))
    assert comments.leading == [" a", " b"]


def test_from_location_keeps_inner_blank_lines():
    comments = Comments.from_location(_location(leading_comments=" a\n\n b"))
    assert comments.leading == [" a", "", " b"]


def test_empty_comments_render_nothing():
    assert Comments().format_with_indent(3) == ""


def test_leading_comments_with_indent():
    comments = Comments(leading=[" Foo"])
    assert comments.format_with_indent(1) == "    /// Foo\n"


def test_detached_block_followed_by_blank_line():
    comments = Comments(leading_detached=[[" x"]])
    assert comments.format_with_indent(0) == "// x\n\n"


def test_leading_and_trailing_are_separated():
    comments = Comments(leading=[" a"], trailing=[" b"])
    assert comments.format_with_indent(0) == "/// a\n///\n/// b\n"


def test_no_separator_with_only_trailing():
    comments = Comments(trailing=[" b"])
    rendered = comments.format_with_indent(0)
    assert rendered.splitlines() == ["/// b"]


def test_every_line_is_indented():
    comments = Comments(
        leading_detached=[[" d1", " d2"]],
        leading=[" l1", " l2"],
        trailing=[" t1"],
    )
    rendered = comments.format_with_indent(2)
    lines = rendered.split("\n")[:-1]
    assert all(line == "" or line.startswith(" " * 8 + "//") for line in lines)
    # two detached, one blank, two leading, one separator, one trailing
    assert len(lines) == 7


def test_method_defaults():
    method = Method(
        name="say_hello",
        proto_name="SayHello",
        comments=Comments(),
        input_type="HelloRequest",
        output_type="HelloReply",
        input_proto_type=".helloworld.HelloRequest",
        output_proto_type=".helloworld.HelloReply",
    )
    assert method.options == MethodOptions()
    assert method.client_streaming is False
    assert method.server_streaming is False


def test_service_holds_methods():
    method = Method(
        name="say_hello",
        proto_name="SayHello",
        comments=Comments(),
        input_type="HelloRequest",
        output_type="HelloReply",
        input_proto_type=".helloworld.HelloRequest",
        output_proto_type=".helloworld.HelloReply",
        client_streaming=True,
    )
    service = Service(
        name="Greeting",
        proto_name="Greeting",
        package="helloworld",
        comments=Comments(leading=[" hi"]),
        methods=[method],
    )
    assert service.methods[0].client_streaming is True
    assert service.options == ServiceOptions()
    assert service.comments.leading == [" hi"]