import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.errors import ConfigurationError, GenerationError, OutputError
from metamodel_openapi.generator.openapi import OpenApiGenerator
from metamodel_openapi.model.concepts import Attribute, Model, Type
from metamodel_openapi.model.loader import load_model, parse_model
from metamodel_openapi.names import NamesCalculator
from metamodel_openapi.packages import PackagesCalculator
from metamodel_openapi.reporter import Reporter

FIXTURES = Path(__file__).parent / "fixtures"

CLUSTER_PATH = "/api/clusters_mgmt/v1/clusters/{cluster_id}"


def _generator(model: Model, output: Path, reporter: Reporter | None = None, **kwargs) -> OpenApiGenerator:
    return OpenApiGenerator(
        reporter=reporter or Reporter(quiet=True),
        model=model,
        output=output,
        names=NamesCalculator(),
        binding=BindingCalculator(),
        packages=PackagesCalculator(),
        **kwargs,
    )


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestGeneratorConfiguration:
    @pytest.mark.parametrize("missing, message", [
        ("reporter", "reporter is mandatory"),
        ("model", "model is mandatory"),
        ("output", "output directory is mandatory"),
        ("names", "names calculator is mandatory"),
        ("binding", "binding calculator is mandatory"),
        ("packages", "packages calculator is mandatory"),
    ])
    def test_mandatory_settings(self, missing, message, tmp_path):
        settings = {
            "reporter": Reporter(quiet=True),
            "model": Model(),
            "output": tmp_path,
            "names": NamesCalculator(),
            "binding": BindingCalculator(),
            "packages": PackagesCalculator(),
        }
        settings[missing] = None
        with pytest.raises(ConfigurationError, match=message):
            OpenApiGenerator(**settings)

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ConfigurationError):
            _generator(Model(), tmp_path, fmt="xml")


class TestGeneratedDocument:
    @pytest.fixture
    def documents(self, tmp_path):
        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        written = _generator(model, tmp_path).run()
        return {str(p.relative_to(tmp_path)): _read(p) for p in written}

    def test_one_file_per_version(self, documents):
        assert list(documents) == [
            "clusters_mgmt/v1/openapi.json",
            "accounts_mgmt/v1/openapi.json",
        ]

    def test_top_level_layout(self, documents):
        doc = documents["clusters_mgmt/v1/openapi.json"]
        assert list(doc) == ["openapi", "info", "servers", "paths", "components", "security"]
        assert doc["openapi"] == "3.0.0"
        assert doc["info"] == {
            "version": "v1",
            "title": "clusters_mgmt",
            "license": {"name": "Apache 2.0", "url": "http://www.apache.org/licenses/LICENSE-2.0"},
            "contact": {"name": "OCM Feedback", "email": "ocm-feedback@redhat.com"},
        }
        assert doc["servers"] == [{"description": "Production", "url": "https://api.openshift.com"}]
        assert doc["security"] == [{"bearer": []}]

    def test_paths_sorted(self, documents):
        doc = documents["clusters_mgmt/v1/openapi.json"]
        assert list(doc["paths"]) == ["/api/clusters_mgmt/v1/clusters", CLUSTER_PATH]

    def test_get_cluster(self, documents):
        get = documents["clusters_mgmt/v1/openapi.json"]["paths"][CLUSTER_PATH]["get"]
        assert get["parameters"] == [
            {"name": "cluster_id", "in": "path", "schema": {"type": "string"}},
        ]
        assert get["responses"]["200"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/Cluster",
        }
        assert get["responses"]["default"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/Error",
        }

    def test_every_operation_has_two_responses(self, documents):
        for doc in documents.values():
            for item in doc["paths"].values():
                for operation in item.values():
                    responses = operation["responses"]
                    assert len(responses) == 2
                    assert "default" in responses

    def test_schemas_in_model_order(self, documents):
        schemas = documents["clusters_mgmt/v1/openapi.json"]["components"]["schemas"]
        assert list(schemas) == ["ClusterState", "Cluster", "CloudProvider", "Error"]
        assert schemas["ClusterState"] == {"type": "string", "enum": ["pending", "ready"]}
        assert list(schemas["Cluster"]["properties"])[:3] == ["kind", "id", "href"]

    def test_list_response(self, documents):
        get = documents["clusters_mgmt/v1/openapi.json"]["paths"]["/api/clusters_mgmt/v1/clusters"]["get"]
        assert [p["name"] for p in get["parameters"]] == ["page", "size", "search"]
        schema = get["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["type"] == "object"
        assert list(schema["properties"]) == ["page", "size", "total", "items"]

    def test_yaml_output(self, tmp_path):
        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        written = _generator(model, tmp_path, fmt="yaml").run()
        assert written[0] == tmp_path / "clusters_mgmt" / "v1" / "openapi.yaml"


class TestGenerationErrors:
    def test_unresolvable_type_counts_one_error(self, tmp_path):
        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        cluster = model.services[0].versions[0].types[1]
        cluster.attributes.append(
            Attribute(name="extra", type=Type.model_construct(name="Interface", kind="interface"))
        )
        reporter = Reporter(quiet=True)

        with pytest.raises(GenerationError, match="there was 1 error") as info:
            _generator(model, tmp_path, reporter).run()

        assert info.value.errors == 1
        assert reporter.errors == 1
        clusters = _read(tmp_path / "clusters_mgmt" / "v1" / "openapi.json")
        assert clusters["components"]["schemas"]["Cluster"]["properties"]["extra"] == {}
        assert "Error" in clusters["components"]["schemas"]
        assert (tmp_path / "accounts_mgmt" / "v1" / "openapi.json").exists()

    def test_errors_plural(self, tmp_path):
        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        bad = Type.model_construct(name="Interface", kind="interface")
        cluster = model.services[0].versions[0].types[1]
        cluster.attributes.append(Attribute(name="a", type=bad))
        cluster.attributes.append(Attribute(name="b", type=bad))

        with pytest.raises(GenerationError, match="there were 2 errors"):
            _generator(model, tmp_path).run()

    def test_write_failure_aborts(self, tmp_path):
        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")) as write:
            with pytest.raises(OutputError, match="disk full"):
                _generator(model, tmp_path).run()
        assert write.call_count == 1

    def test_package_failure_aborts(self, tmp_path):
        class EmptyPackages(PackagesCalculator):
            def version_package(self, service, version):
                return ""

        model = load_model(FIXTURES / "clusters_mgmt.yaml")
        generator = OpenApiGenerator(
            reporter=Reporter(quiet=True),
            model=model,
            output=tmp_path,
            names=NamesCalculator(),
            binding=BindingCalculator(),
            packages=EmptyPackages(),
        )

        with pytest.raises(ConfigurationError, match="package is mandatory"):
            generator.run()
        assert list(tmp_path.iterdir()) == []


class TestNameSpelling:
    def test_service_and_version_names_share_one_spelling(self, tmp_path):
        model = parse_model({"services": [{
            "name": "ClustersMgmt",
            "versions": [{
                "name": "V1",
                "resources": [
                    {"name": "Root", "locators": [{"name": "nodePools", "target": "NodePools"}]},
                    {"name": "NodePools", "methods": [{"name": "List"}]},
                ],
            }],
        }]})

        written = _generator(model, tmp_path, fmt="yaml").run()

        assert written == [tmp_path / "clusters_mgmt" / "v1" / "openapi.yaml"]
        doc = yaml.safe_load(written[0].read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "clusters_mgmt"
        assert doc["info"]["version"] == "v1"
        assert list(doc["paths"]) == ["/api/clusters_mgmt/v1/node_pools"]
