from conftest import make_message

from sitegen.config import DEFAULT_TAG_STYLE, DEFAULT_TAG_STYLES, SiteGenConfig, TagStyle
from sitegen.extract import (
    build_project_summary,
    build_project_update,
    detail_filename,
    parse_blog_message,
    parse_metadata,
    resolve_tag_style,
    sanitize,
    snowflake_to_dt,
    split_update,
)

FORUM = {
    "id": "200",
    "guild_id": "300",
    "available_tags": [
        {"id": "1", "name": "Web"},
        {"id": "2", "name": "Music"},
        {"id": "3", "name": "Misc"},
    ],
}


# ── sanitize ────────────────────────────────────────────────────


def test_sanitize_collapses_to_lowercase_alnum():
    assert sanitize("Focus PCSI") == "focuspcsi"
    assert sanitize("Été 2024 – v2!") == "t2024v2"


def test_sanitize_collisions_are_possible():
    assert sanitize("Focus-PCSI") == sanitize("focus pcsi")


def test_detail_filename():
    assert detail_filename("Focus PCSI") == "focuspcsi_detail.json"


# ── metadata ────────────────────────────────────────────────────


def test_parse_metadata_splits_on_first_colon():
    assert parse_metadata("Desc: Hello: World\nVersion: 2.0") == {
        "desc": "Hello: World",
        "version": "2.0",
    }


def test_parse_metadata_lowercases_keys_and_skips_plain_lines():
    meta = parse_metadata("Some intro text\nBtnText :  OUVRIR \nLink: https://example.com/a")
    assert meta == {"btntext": "OUVRIR", "link": "https://example.com/a"}


# ── blog ────────────────────────────────────────────────────────


def test_blog_three_fields_defaults_link():
    entry = parse_blog_message(make_message("1", "Title | Tag | Desc"))
    assert entry is not None
    assert (entry.title, entry.tag, entry.desc, entry.link) == ("Title", "Tag", "Desc", "#")
    assert entry.date == "13/10/2024"
    assert entry.image is None


def test_blog_four_fields_and_extra_fields_ignored():
    entry = parse_blog_message(make_message("1", "T | G | D | https://x.y | extra"))
    assert entry is not None
    assert entry.link == "https://x.y"


def test_blog_empty_link_defaults():
    entry = parse_blog_message(make_message("1", "T | G | D | "))
    assert entry is not None
    assert entry.link == "#"


def test_blog_rejects_short_pipe_less_and_bot_messages():
    assert parse_blog_message(make_message("1", "Title | Tag")) is None
    assert parse_blog_message(make_message("2", "Just chatting")) is None
    assert parse_blog_message(make_message("3", "T | G | D", bot=True)) is None


# ── projects ────────────────────────────────────────────────────


def test_resolve_tag_style_uses_first_applied_tag():
    thread = {"applied_tags": ["2", "1"]}
    style = resolve_tag_style(thread, FORUM, DEFAULT_TAG_STYLES, DEFAULT_TAG_STYLE)
    assert style == TagStyle(icon="fa-brands fa-spotify", style="p-spot")


def test_resolve_tag_style_falls_back_to_default():
    for thread in ({}, {"applied_tags": []}, {"applied_tags": ["99"]}, {"applied_tags": ["3"]}):
        assert resolve_tag_style(thread, FORUM, DEFAULT_TAG_STYLES, DEFAULT_TAG_STYLE) == DEFAULT_TAG_STYLE


def test_build_project_summary_with_metadata():
    thread = {"id": "500", "name": "Focus PCSI", "applied_tags": ["1"]}
    starter = make_message("500", "Desc: Révisions: maths\nVersion: V2.1\nDate: 2024-05-01\nBtnText: OUVRIR")

    summary = build_project_summary(thread, starter, FORUM, SiteGenConfig())

    assert summary.to_dict() == {
        "title": "Focus PCSI",
        "version": "V2.1",
        "date": "2024-05-01",
        "desc": "Révisions: maths",
        "link": "#",
        "icon": "fas fa-globe",
        "style": "p-web",
        "btnText": "OUVRIR",
        "detailFile": "focuspcsi_detail.json",
    }


def test_build_project_summary_defaults():
    thread = {
        "id": "500",
        "name": "Side Project",
        "thread_metadata": {"create_timestamp": "2024-09-01T23:30:00+00:00"},
    }
    summary = build_project_summary(thread, make_message("500", "no metadata here"), FORUM, SiteGenConfig())

    assert summary.version == "V1.0"
    assert summary.desc == "Pas de description"
    assert summary.btn_text == "VOIR"
    assert summary.date == "2024-09-01"
    assert (summary.icon, summary.style) == ("fas fa-code", "p-default")


def test_project_date_falls_back_to_snowflake():
    # 175928847299117063 is the example snowflake from Discord's docs (2016-04-30)
    assert snowflake_to_dt("175928847299117063").strftime("%Y-%m-%d") == "2016-04-30"
    thread = {"id": "175928847299117063", "name": "Old"}
    summary = build_project_summary(thread, make_message("1", ""), FORUM, SiteGenConfig())
    assert summary.date == "2016-04-30"


def test_custom_tag_table_from_config():
    cfg = SiteGenConfig(tag_styles={"Misc": TagStyle(icon="fas fa-star", style="p-misc")})
    thread = {"id": "500", "name": "X", "applied_tags": ["3"]}
    summary = build_project_summary(thread, make_message("500", ""), FORUM, cfg)
    assert (summary.icon, summary.style) == ("fas fa-star", "p-misc")


# ── updates ─────────────────────────────────────────────────────


def test_split_update():
    assert split_update(make_message("1", "V5.0 - Stable\nline 1\nline 2")) == ("V5.0 - Stable", "line 1\nline 2")
    assert split_update(make_message("2", "V5.1")) == ("V5.1", "")


def test_build_project_update_appends_image_markup():
    msg = make_message("9", "V2.0\nNew UI", timestamp="2024-10-14T22:15:00+00:00")
    update = build_project_update(msg, "img/update_9.png")
    assert update.to_dict() == {
        "date": "2024-10-14",
        "version": "V2.0",
        "content": "New UI\n\n![Image](img/update_9.png)",
    }


def test_build_project_update_without_image():
    update = build_project_update(make_message("9", "V2.0\nNew UI"))
    assert update.content == "New UI"
