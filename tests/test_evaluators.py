"""Tests for default fragment evaluators."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
import yaml
from config_entities import DEFAULT_EVALUATORS
from config_entities import PropertySnapshot
from config_entities.evaluators import evaluate_python
from config_entities.evaluators import evaluate_yaml


class TestEvaluateYaml:
    """Test evaluate_yaml function."""

    @pytest.fixture
    def tmp(self):
        """Create a temporary directory."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def fragment(self, tmp: Path, content: str) -> Path:
        path = tmp / "fragment.yaml"
        path.write_text(content)
        return path

    def test_mapping(self, tmp):
        """Test a YAML mapping is returned as a dict."""
        path = self.fragment(tmp, "a: 1\nb:\n  c: two\n")
        assert evaluate_yaml(path, PropertySnapshot()) == {"a": 1, "b": {"c": "two"}}

    def test_scalar(self, tmp):
        """Test a scalar document is returned as-is."""
        assert evaluate_yaml(self.fragment(tmp, "42\n"), PropertySnapshot()) == 42

    def test_empty_document(self, tmp):
        """Test an empty document yields an empty dict."""
        assert evaluate_yaml(self.fragment(tmp, ""), PropertySnapshot()) == {}

    def test_property_interpolation(self, tmp):
        """Test ${name} references are replaced inside strings."""
        path = self.fragment(tmp, "file: ${base_folder}/sub/folder/file.txt\n")
        result = evaluate_yaml(path, PropertySnapshot({"base_folder": "/project"}))
        assert result == {"file": "/project/sub/folder/file.txt"}

    def test_whole_placeholder_keeps_type(self, tmp):
        """Test a string that is only a placeholder takes the raw property value."""
        path = self.fragment(tmp, "port: ${port}\nflags: ${flags}\nlabel: port-${port}\n")
        result = evaluate_yaml(path, PropertySnapshot({"port": 8080, "flags": ["a", "b"]}))
        assert result == {"port": 8080, "flags": ["a", "b"], "label": "port-8080"}

    def test_interpolation_in_lists_and_nested(self, tmp):
        """Test substitution reaches nested mappings and lists."""
        path = self.fragment(tmp, "hosts:\n  - ${env}-1\n  - ${env}-2\nnested:\n  name: ${env}\n")
        result = evaluate_yaml(path, PropertySnapshot({"env": "prod"}))
        assert result == {"hosts": ["prod-1", "prod-2"], "nested": {"name": "prod"}}

    def test_plain_dollar_text_unchanged(self, tmp):
        """Test dollar signs outside ${name} references are kept as written."""
        path = self.fragment(tmp, "password: pa$$word\nprice: cost $5\nshell: $HOME/bin\n")
        assert evaluate_yaml(path, PropertySnapshot()) == {
            "password": "pa$$word",
            "price": "cost $5",
            "shell": "$HOME/bin",
        }

    def test_dollar_text_beside_reference(self, tmp):
        """Test only ${name} is replaced when other dollar text is present."""
        path = self.fragment(tmp, "price: ${currency}$5 or $$\n")
        result = evaluate_yaml(path, PropertySnapshot({"currency": "USD"}))
        assert result == {"price": "USD$5 or $$"}

    def test_undefined_property(self, tmp):
        """Test an undefined property raises KeyError."""
        path = self.fragment(tmp, "a: ${missing}\n")
        with pytest.raises(KeyError):
            evaluate_yaml(path, PropertySnapshot())

    def test_invalid_yaml(self, tmp):
        """Test malformed YAML raises a YAML error."""
        with pytest.raises(yaml.YAMLError):
            evaluate_yaml(self.fragment(tmp, "a: [unclosed\n"), PropertySnapshot())


class TestEvaluatePython:
    """Test evaluate_python function."""

    @pytest.fixture
    def tmp(self):
        """Create a temporary directory."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def fragment(self, tmp: Path, content: str) -> Path:
        path = tmp / "fragment.py"
        path.write_text(content)
        return path

    def test_entity_mapping(self, tmp):
        """Test the entity variable is returned."""
        path = self.fragment(tmp, "entity = {'a': 1}\n")
        assert evaluate_python(path, PropertySnapshot()) == {"a": 1}

    def test_reads_properties(self, tmp):
        """Test scripts can compute values from properties."""
        path = self.fragment(tmp, "entity = {'file': properties['base_folder'] + '/sub/folder/file.txt'}\n")
        result = evaluate_python(path, PropertySnapshot({"base_folder": "/project"}))
        assert result == {"file": "/project/sub/folder/file.txt"}

    def test_arbitrary_logic(self, tmp):
        """Test scripts may run any Python to build their value."""
        path = self.fragment(tmp, "entity = [n * n for n in range(properties.get('count', 3))]\n")
        assert evaluate_python(path, PropertySnapshot()) == [0, 1, 4]

    def test_iterates_property_values(self, tmp):
        """Test scripts can use the full mapping interface of properties."""
        path = self.fragment(tmp, "entity = {'n': sum(properties.values())}\n")
        assert evaluate_python(path, PropertySnapshot({"a": 1, "b": 2})) == {"n": 3}

    def test_properties_read_only(self, tmp):
        """Test scripts cannot change the build's properties."""
        path = self.fragment(tmp, "properties['x'] = 1\nentity = {}\n")
        snapshot = PropertySnapshot()
        with pytest.raises(TypeError):
            evaluate_python(path, snapshot)
        assert dict(snapshot) == {}

    def test_missing_entity(self, tmp):
        """Test a script without entity raises NameError."""
        with pytest.raises(NameError, match="entity"):
            evaluate_python(self.fragment(tmp, "value = 1\n"), PropertySnapshot())

    def test_script_error_propagates(self, tmp):
        """Test exceptions raised by the script propagate."""
        with pytest.raises(ZeroDivisionError):
            evaluate_python(self.fragment(tmp, "entity = 1 / 0\n"), PropertySnapshot())


class TestDefaultEvaluators:
    """Test the default evaluator registry."""

    def test_registered_extensions(self):
        """Test default extensions map to the expected evaluators."""
        assert DEFAULT_EVALUATORS == {
            ".yaml": evaluate_yaml,
            ".yml": evaluate_yaml,
            ".py": evaluate_python,
        }


class TestPropertySnapshot:
    """Test PropertySnapshot model."""

    def test_mapping_interface(self):
        """Test snapshot behaves as a read-only mapping."""
        snapshot = PropertySnapshot({"a": 1, "b": 2})
        assert snapshot["a"] == 1
        assert len(snapshot) == 2
        assert set(snapshot) == {"a", "b"}
        assert snapshot.get("missing") is None
        assert snapshot == {"a": 1, "b": 2}

    def test_immutable(self):
        """Test snapshot values and attributes cannot be reassigned."""
        snapshot = PropertySnapshot({"a": 1})
        with pytest.raises(TypeError):
            snapshot["a"] = 2  # type: ignore[index]
        with pytest.raises(TypeError):
            snapshot._values["a"] = 2  # type: ignore[index]
        with pytest.raises(AttributeError):
            snapshot._values = {}  # type: ignore[misc]
        assert snapshot["a"] == 1

    def test_mapping_views(self):
        """Test keys, values and items behave like any mapping."""
        snapshot = PropertySnapshot({"a": 1, "b": 2})
        assert list(snapshot.keys()) == ["a", "b"]
        assert list(snapshot.values()) == [1, 2]
        assert list(snapshot.items()) == [("a", 1), ("b", 2)]

    def test_layered_precedence(self):
        """Test overrides win over base values."""
        snapshot = PropertySnapshot.layered({"f": "file", "g": "only-file"}, {"f": "direct"})
        assert dict(snapshot) == {"f": "direct", "g": "only-file"}

    def test_layered_without_sources(self):
        """Test layering nothing gives an empty snapshot."""
        assert dict(PropertySnapshot.layered(None, None)) == {}
