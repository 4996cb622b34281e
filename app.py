#!/usr/bin/env python3
import aws_cdk as cdk

from cdk.sheets_stack import SheetsStack

app = cdk.App()
SheetsStack(app, "SheetsStack")

app.synth()
