"""Tests for the CDK entry point."""

import os
from unittest.mock import MagicMock, patch

import pytest

import app as cdk_entrypoint
from stacks.web_service import WebServiceStack


class TestStackConfiguration:
    def test_default_stack_name(self):
        config = cdk_entrypoint.StackConfiguration()
        assert config.stack_name == "MyEcsConstructStack"

    def test_stack_name_with_environment(self):
        config = cdk_entrypoint.StackConfiguration(environment="prod")
        assert config.stack_name == "MyEcsConstructStack-prod"


class TestCreateDeploymentEnvironment:
    def test_environment_variables(self):
        with patch.dict(
            os.environ,
            {"CDK_DEFAULT_ACCOUNT": "210987654321", "AWS_DEFAULT_REGION": "eu-west-1"},
        ):
            env = cdk_entrypoint.create_deployment_environment(
                cdk_entrypoint.StackConfiguration(),
            )

        assert env.account == "210987654321"
        assert env.region == "eu-west-1"

    @patch("app.boto3.Session")
    def test_named_profile_resolves_account(self, mock_session_cls):
        mock_session = MagicMock()
        mock_session.region_name = "us-west-2"
        mock_session.client.return_value.get_caller_identity.return_value = {
            "Account": "111122223333",
        }
        mock_session_cls.return_value = mock_session

        env = cdk_entrypoint.create_deployment_environment(
            cdk_entrypoint.StackConfiguration(aws_profile="deploy"),
        )

        mock_session_cls.assert_called_once_with(profile_name="deploy")
        mock_session.client.assert_called_once_with("sts")
        assert env.account == "111122223333"
        assert env.region == "us-west-2"


class TestInitializeApp:
    def test_builds_web_service_stack(self, service_settings):
        cdk_app = cdk_entrypoint.initialize_app(settings=service_settings)
        stack = cdk_app.node.find_child("MyEcsConstructStack")

        assert isinstance(stack, WebServiceStack)
        assert stack.settings is service_settings

    def test_stack_tags(self, service_settings):
        cdk_app = cdk_entrypoint.initialize_app(
            settings=service_settings,
            environment="staging",
        )
        stack = cdk_app.node.find_child("MyEcsConstructStack-staging")

        assert stack.tags.tag_values() == {
            "Environment": "staging",
            "Application": "MyEcsConstruct",
            "ManagedBy": "AWS-CDK",
        }


class TestMain:
    @patch("app.initialize_app")
    @patch("app.get_settings")
    def test_main_synthesizes_with_loaded_settings(
        self,
        mock_get_settings,
        mock_initialize_app,
        service_settings,
    ):
        mock_get_settings.return_value = service_settings
        with patch.dict(os.environ, {"ENVIRONMENT": "dev"}):
            os.environ.pop("AWS_PROFILE", None)
            cdk_entrypoint.main()

        mock_initialize_app.assert_called_once_with(
            settings=service_settings,
            environment="dev",
            aws_profile=None,
        )
        mock_initialize_app.return_value.synth.assert_called_once_with()


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
