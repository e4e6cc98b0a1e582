import azure.functions as func

from showswap_compatibility_service.blueprints import compatibility_bp

app = func.FunctionApp()

app.register_blueprint(compatibility_bp)
