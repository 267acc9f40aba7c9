"""
插件入口文件，用于 python -m fanza_metadata 启动插件主程序
"""

from .plugin_main import main

if __name__ == '__main__':
    main()
