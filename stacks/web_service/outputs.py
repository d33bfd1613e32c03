"""Stack outputs for the web service.

Every published value becomes a CloudFormation export named after the stack
and an SSM parameter under ``/infrastructure/<stack>/``, so consumers can pick
whichever lookup suits them.
"""

from aws_cdk import CfnOutput
from aws_cdk import aws_ssm as ssm
from constructs import Construct


class OutputManager:
    """Publishes stack outputs as CloudFormation exports and SSM Parameters.

    Attributes:
        scope: The construct for which outputs are being managed.
        stack_name: The name of the web service stack.
    """

    def __init__(self, scope: Construct, stack_name: str) -> None:
        self.scope = scope
        self.stack_name = stack_name

    def export_name(self, id_: str) -> str:
        return f"{self.stack_name}-{id_}"

    def parameter_name(self, id_: str) -> str:
        return f"/infrastructure/{self.stack_name}/{self.export_name(id_)}".lower()

    def add_output_with_ssm(self, id_: str, value: str, description: str) -> CfnOutput:
        """Export a value and mirror it into Parameter Store.

        Args:
            id_: Construct id of the output; the parameter gets a suffix.
            value: Value to publish, usually a resource attribute token.
            description: Human readable description shared by both.

        Returns:
            The created CloudFormation output.
        """
        output = CfnOutput(
            self.scope,
            id_,
            value=value,
            export_name=self.export_name(id_),
            description=description,
        )
        ssm.StringParameter(
            self.scope,
            f"{id_}Parameter",
            parameter_name=self.parameter_name(id_),
            string_value=value,
            description=description,
        )
        return output
