from .response import APIResponse, ErrorResponse, success_response
