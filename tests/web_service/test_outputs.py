"""Tests for publishing stack outputs."""

from aws_cdk import App, Stack
from aws_cdk.assertions import Template

from stacks.web_service.outputs import OutputManager


class TestOutputManager:
    def test_names_derive_from_stack(self):
        app = App()
        stack = Stack(app, "OutputStack")
        manager = OutputManager(stack, stack.stack_name)

        assert manager.export_name("Endpoint") == "OutputStack-Endpoint"
        assert (
            manager.parameter_name("Endpoint")
            == "/infrastructure/outputstack/outputstack-endpoint"
        )

    def test_output_and_parameter_created(self):
        app = App()
        stack = Stack(app, "OutputStack")
        manager = OutputManager(stack, stack.stack_name)

        manager.add_output_with_ssm("Endpoint", "example.com", "Endpoint")
        template = Template.from_stack(stack)

        template.has_output(
            "Endpoint",
            {"Value": "example.com", "Export": {"Name": "OutputStack-Endpoint"}},
        )
        template.has_resource_properties(
            "AWS::SSM::Parameter",
            {
                "Name": "/infrastructure/outputstack/outputstack-endpoint",
                "Value": "example.com",
            },
        )
