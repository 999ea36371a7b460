from library_manager.app import create_app

__all__ = ['create_app']
