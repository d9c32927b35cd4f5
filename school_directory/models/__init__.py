from school_directory.models.school import School, SchoolInput, UploadedImage

__all__ = ['School', 'SchoolInput', 'UploadedImage']
