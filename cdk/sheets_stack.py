from aws_cdk import (
    CfnOutput,
    Stack,
    Duration,
    aws_lambda as lambda_,
)
from constructs import Construct
from pathlib import Path


class SheetsStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        functions_dir = Path(__file__).parent.parent / "functions"

        # Google Sheets fetch for the import screen
        # Note: Run `pip install -r requirements.txt -t .` in functions/fetch_google_sheets before deploying
        fetch_fn = self.create_http_lambda(
            name="fetch-google-sheets",
            description="Fetches Google Sheets values via service account or public CSV export",
            code_path=str(functions_dir / "fetch_google_sheets"),
            handler="handler.main",
            timeout_seconds=60,
            memory_mb=256,
            environment={
                "GOOGLE_SERVICE_ACCOUNT_EMAIL": "",  # Set in console
                "GOOGLE_SERVICE_ACCOUNT_KEY": "",  # Set in console, PEM private key
                "GOOGLE_SERVICE_ACCOUNT_JSON_B64": "",  # Optional, base64 of the JSON key file
            },
        )

        # CORS headers come from the handler itself, including OPTIONS preflight
        fetch_url = fetch_fn.add_function_url(
            auth_type=lambda_.FunctionUrlAuthType.NONE,
        )

        CfnOutput(self, "FetchGoogleSheetsUrl", value=fetch_url.url)

    def create_http_lambda(
        self,
        name: str,
        description: str,
        code_path: str,
        handler: str,
        timeout_seconds: int = 30,
        memory_mb: int = 256,
        environment: dict = None,
    ) -> lambda_.Function:
        """Create a Lambda function meant to sit behind a Function URL."""

        return lambda_.Function(
            self,
            f"{name}-fn",
            function_name=name,
            description=description,
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler=handler,
            code=lambda_.Code.from_asset(code_path),
            timeout=Duration.seconds(timeout_seconds),
            memory_size=memory_mb,
            environment=environment or {},
        )
