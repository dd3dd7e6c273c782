"""Middlewares: authentication, CORS, gzip compression, request logging and recovery."""