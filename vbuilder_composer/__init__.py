"""vbuilder-composer: Composer 插件 — 生成 vBuilder 启动文件与伪 autoload 文件"""

__version__ = "1.0.0"
