"""Azure Functions V2 entry point — registers blueprints from src/."""

import os
import sys

# Add src/ to Python path so that Azure Functions runtime can resolve
# the pdf_admin package from the src/ layout.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import azure.functions as func

from pdf_admin.functions.http_trigger import bp as http_bp
from pdf_admin.functions.timer_trigger import bp as timer_bp

app = func.FunctionApp()
app.register_blueprint(timer_bp)
app.register_blueprint(http_bp)
