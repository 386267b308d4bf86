from __future__ import annotations

from pdf_rasterizer.parameters import Flag, ParameterSet


def test_flag_rendering() -> None:
    assert Flag.define("NOPAUSE").render() == "-dNOPAUSE"
    assert Flag.define("JPEGQ", 90).render() == "-dJPEGQ=90"
    assert Flag.string("DEVICE", "jpeg").render() == "-sDEVICE=jpeg"
    assert Flag("-r", value=300).render() == "-r300"
    assert Flag.literal("/tmp/in.pdf").render() == "/tmp/in.pdf"
    assert str(Flag.define("ColorConversionStrategy", "/LeaveColorUnchanged")) == (
        "-dColorConversionStrategy=/LeaveColorUnchanged"
    )


def test_append_preserves_order_and_duplicates() -> None:
    parameters = ParameterSet("-dNOPAUSE")
    parameters.append(Flag.define("BATCH"), "-dNOPAUSE")
    assert parameters.render() == ["-dNOPAUSE", "-dBATCH", "-dNOPAUSE"]
    assert len(parameters) == 3


def test_contains_is_exact_match() -> None:
    parameters = ParameterSet(Flag.string("DEVICE", "jpeg"))
    assert parameters.contains("-sDEVICE=jpeg")
    assert "-sDEVICE=jpeg" in parameters
    assert not parameters.contains("-sDEVICE")
    assert not parameters.contains("-sDEVICE=jpe")
    assert not parameters.contains("-sDEVICE=pngalpha")


def test_extend_appends_other_set() -> None:
    first = ParameterSet("-a", "-b")
    first.extend(ParameterSet("-c"))
    assert first.render() == ["-a", "-b", "-c"]
