# Инициализация пакета tesuto
__version__ = "1.0.0"
__author__ = "Tesuto Team"
