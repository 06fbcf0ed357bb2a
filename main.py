from data_uri_converter.api import create_asgi_app

app = create_asgi_app()
