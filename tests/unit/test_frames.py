import asyncio

from tests.helpers.fakes import ScriptedProvider, hidden_input, make_document
from tests.helpers.scanner_imports import Frame, FrameTraversal, StrictnessTier

MAIN = "https://main.test/"
FAST = "https://fast.test/"
SLOW = "https://slow.test/"
BROKEN = "https://broken.test/"
HANGING = "https://hanging.test/"


def _provider(**kwargs):
    frame_urls = kwargs.pop("frame_urls", (SLOW, FAST))
    return ScriptedProvider(
        main=make_document(MAIN, [hidden_input("main-1"), hidden_input("main-2")]),
        frames=[Frame(url=url) for url in frame_urls],
        frame_documents={
            SLOW: make_document(SLOW, [hidden_input("slow-1")]),
            FAST: make_document(FAST, [hidden_input("fast-1"), hidden_input("fast-2")]),
        },
        **kwargs,
    )


def _run(provider, **kwargs):
    traversal = FrameTraversal(provider=provider, tier=StrictnessTier.RENDERED, **kwargs)
    return asyncio.run(traversal.run(provider.main))


def test_main_page_precedes_frames_in_discovery_order():
    provider = _provider(delays={SLOW: 0.05})

    result = _run(provider)

    assert [f.name for f in result.findings] == ["main-1", "main-2", "slow-1", "fast-1", "fast-2"]
    assert [f.location for f in result.findings] == [
        "main page",
        "main page",
        f"iframe({SLOW})",
        f"iframe({FAST})",
        f"iframe({FAST})",
    ]
    assert result.frames_scanned == 2
    assert result.frames_failed == 0


def test_failing_frame_contributes_nothing():
    baseline = _run(_provider())
    provider = _provider(frame_urls=(SLOW, BROKEN, FAST), failing_frames=(BROKEN,))

    result = _run(provider)

    assert result.findings == baseline.findings
    assert all(BROKEN not in f.location for f in result.findings)
    assert result.frames_failed == 1
    assert result.frames_scanned == 2


def test_frame_timeout_is_local():
    provider = _provider(frame_urls=(HANGING, FAST), hanging_frames=(HANGING,))

    result = _run(provider, frame_timeout=0.05)

    assert [f.name for f in result.findings] == ["main-1", "main-2", "fast-1", "fast-2"]
    assert result.frames_failed == 1


def test_frames_are_not_requested_when_disabled():
    provider = _provider()

    result = _run(provider, follow_frames=False)

    assert [f.name for f in result.findings] == ["main-1", "main-2"]
    assert provider.frames_requested is False


def test_frame_listing_failure_keeps_main_findings():
    provider = _provider()

    async def broken_frames(document):
        raise RuntimeError("target closed")

    provider.frames = broken_frames  # type: ignore[assignment]

    result = _run(provider)

    assert [f.name for f in result.findings] == ["main-1", "main-2"]
