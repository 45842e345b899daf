"""
Presupuestos: quote form to PDF generator

Packages:
    api/        Form page, preview and download routes, HTML templates
    forms/      Validation, text layout, PDF composition, generation session
    core/       Shared configuration, paths, errors and counter persistence
"""
