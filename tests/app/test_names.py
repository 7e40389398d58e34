"""会话/模板命名测试"""

import pytest

from termlayout.app.names import (
    find_template,
    generate_numeric_name,
    name_exists,
    template_session_name,
    validate_template_name,
)
from termlayout.errors import ValidationError
from termlayout.layout.models import Template
from termlayout.mux.base import SessionInfo


def _sessions(*names):
    return [SessionInfo(name=n) for n in names]


class TestNumericName:
    def test_no_sessions(self):
        assert generate_numeric_name([]) == "0"

    def test_lowest_unused(self):
        assert generate_numeric_name(_sessions("0", "1", "work", "3")) == "2"

    def test_gap_at_zero(self):
        assert generate_numeric_name(_sessions("1", "2")) == "0"


class TestNamespace:
    def test_name_exists_checks_both(self):
        templates = [Template.new_root("dev")]
        assert name_exists("dev", _sessions("work"), templates)
        assert name_exists("work", _sessions("work"), templates)
        assert not name_exists("other", _sessions("work"), templates)

    def test_find_template(self):
        dev = Template.new_root("dev")
        assert find_template("dev", [dev]) is dev
        assert find_template("ops", [dev]) is None

    def test_template_session_name(self):
        assert template_session_name("dev", 1700000000.9) == "dev-1700000000"


class TestValidateTemplateName:
    def test_strips(self):
        assert validate_template_name("  dev ", [], []) == "dev"

    def test_empty(self):
        with pytest.raises(ValidationError, match="Template name cannot be empty"):
            validate_template_name("   ", [], [])

    def test_taken_by_session(self):
        with pytest.raises(ValidationError, match="Name already exists"):
            validate_template_name("work", _sessions("work"), [])
